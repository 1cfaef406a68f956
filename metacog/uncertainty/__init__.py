from metacog.uncertainty.quantifier import UncertaintyQuantifier

__all__ = ["UncertaintyQuantifier"]
