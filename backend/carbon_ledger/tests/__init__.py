"""
Test suite for the carbon ledger.

Test Categories:
- Identifier derivation and clocks
- Farm and sensor registry
- Measurement ingestion and verification
- Credit issuance, buyers and the marketplace
- Practice verification and incentive payments
- REST API and management commands
"""
