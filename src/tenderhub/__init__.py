"""
TenderHub - B2B tender marketplace engine.

Companies publish tenders with a budget range and a deadline; other
companies submit one application each. Ships a terminal-first CLI on top
of a SQLAlchemy-backed store.
"""

__version__ = "0.1.0"
__app_name__ = "tenderhub"
