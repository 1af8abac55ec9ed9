"""Equipment directory: listings of farm machinery offered for rent."""
