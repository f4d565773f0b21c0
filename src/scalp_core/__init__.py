"""Scalp signal engine: indicators, opening/holdability scoring and recommendations for one futures contract."""
