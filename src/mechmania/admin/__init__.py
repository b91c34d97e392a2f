"""Admin commands: leaderboard and per-team inspection."""
