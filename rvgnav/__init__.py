"""Multi-agent navigation over reduced visibility graphs."""
