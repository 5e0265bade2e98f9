"""State layer.

Single source of truth for the vessel's navigation values and the
forecast run bookkeeping. Navigation values from the Signal K bus, from
deltas handed in by the caller or from manual calls are merged here.
"""
