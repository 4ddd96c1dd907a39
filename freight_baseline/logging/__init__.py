"""Run logging: labeled console output and JSON Lines run logs."""
