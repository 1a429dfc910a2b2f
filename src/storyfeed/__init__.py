"""Story feed service: public feed, engagement bookkeeping and abuse containment."""

__version__ = "0.1.0"
