"""Call control, messaging and phone verification on top of a telephony provider.

Everything here is request-scoped: nothing is kept between requests.
"""
