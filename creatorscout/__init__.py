"""
CreatorScout
=============
Short-video creator vetting: statistics over a creator's recent posts, an
LLM-assisted category classifier, and a review written back to the brand's
record store.
"""

__version__ = "0.1.0"
