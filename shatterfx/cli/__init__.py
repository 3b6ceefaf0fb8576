"""shatterfx command-line tools."""
