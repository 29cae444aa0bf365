"""Durable registration record adapters."""
