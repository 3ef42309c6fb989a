"""Bridge services: permission gate, payload validator, facade and note composer."""
