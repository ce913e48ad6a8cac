"""HTTP surface for bouwplan."""
