"""Game Day backend: game completion and match-result engine for youth leagues."""
