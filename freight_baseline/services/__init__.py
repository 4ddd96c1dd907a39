"""Cataloging, extraction, inventory and run orchestration services."""
