"""HTTP facades and content negotiation used by the toolbar."""
