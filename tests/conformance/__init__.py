"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the token ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - total supply equals the sum of balances
2. atomicity.py - a rejected call changes no storage byte
3. authorization.py - owner-only operations reject everyone else
4. reentrancy.py - the guard flag never outlives a call
5. determinism.py - identical call sequences give identical storage
6. canonicalization.py - one byte encoding per logical state

These tests use hypothesis for property-based testing.
"""
