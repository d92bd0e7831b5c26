"""Live-state synchronization and staking control for a full-node wallet."""

__version__ = "0.1.0"
