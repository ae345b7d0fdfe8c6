"""Domain bounded contexts.

- shared: pattern, trait and result types used everywhere
- intention: what the user must do, and the schema that guards it
- constraint: what limits how it may be presented
- affinity: rules that connect the two
- resolution: the engine, render instructions and the ResolvedUI contract
- materializer: renderer lookup for the external rendering layer
"""
