"""Enkrypt: INR to USDT demo exchange API."""
