"""File input for fixtures, scenarios and configuration."""
