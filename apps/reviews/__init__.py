"""Reviews app: renters rate equipment they have paid to rent."""
