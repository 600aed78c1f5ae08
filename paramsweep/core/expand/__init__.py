"""Cartesian-product expansion of parameter mappings.

A mapping may mix constant values with multi-valued fields. `expand` fans the
multi-valued fields out into one concrete mapping per combination and
`expanded_count` reports how many mappings that yields without building them.
"""
