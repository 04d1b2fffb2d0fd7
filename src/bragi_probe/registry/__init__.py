"""Environment probing, index label decoding and status records."""
