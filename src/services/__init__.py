"""Exchange clients and the price resolution engine built on top of them."""
