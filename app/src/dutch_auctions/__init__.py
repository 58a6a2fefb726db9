"""Dutch auction planner: splits sell orders into overlapping sub-auctions and tracks them."""
