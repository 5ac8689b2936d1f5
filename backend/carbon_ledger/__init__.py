"""
Regenerative carbon credit ledger.

Tracks farms, carbon measurements and their verification, carbon credit
issuance, and the buyer marketplace.
"""
