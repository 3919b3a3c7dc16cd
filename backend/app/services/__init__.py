"""Application service layer for the community board."""
