# rewardjar/services/__init__.py
