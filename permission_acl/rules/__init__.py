"""
Rules engine package.

Defines the rule model and the evaluation pipeline: structural
validation, value matching, rule applicability and first-match-wins
resolution with the create fallback for missing resources.

Modules of interest:
- models: Data classes for Rule, Selector, Request and Verdict.
- validator: Well-formedness checks and rule compilation.
- patterns: Exact, set, wildcard and regular expression matching.
- matcher: Subject, resource and action applicability.
- engine: The PolicyEvaluator decision function.

The engine is synchronous and keeps no state between calls.
"""
