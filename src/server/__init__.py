"""HTTP surface for confluence_mirror."""
