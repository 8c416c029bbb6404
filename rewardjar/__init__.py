"""Reward Jar: token jars, rewards and a transaction log behind a FastAPI service."""
