"""Command-line tools: corpus training, grammar linting, interactive preview."""
