"""Domain constants shared across talkvote modules."""
