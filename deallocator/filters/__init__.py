"""Resource filtering modules.

ExemptionSet holds the protected subscriptions; Classifier splits the
inventory into exempt and actionable records.
"""

from deallocator.filters.exemption import Classifier, ExemptionSet, classify

__all__ = ["Classifier", "ExemptionSet", "classify"]
