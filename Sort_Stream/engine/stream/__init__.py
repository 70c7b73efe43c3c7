"""MessagePack encoding of operation traces."""
