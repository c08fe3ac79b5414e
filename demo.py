#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Token Ledger Step by Step

This is a pedagogical demonstration of how the fungible-token ledger works.
Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-2:  Foundation     - Instantiation, balances, total supply
  3-4:  Delegation     - Allowances, transfer_from, rejected spends
  5-6:  Supply control - Pause, mint, burn
  7-8:  Guarantees     - Atomicity, reentrancy guard, conservation proof

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from tokenledger import (
    TokenContract, MemoryStorage, TokenError,
    InsufficientAllowance, InsufficientBalance, ContractPaused, Unauthorized,
    ReentrantCall,
)
from tokenledger.state import STATE_KEY, encode_state


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    owner: str = "owner"
    alice_initial: int = 100
    transfer_to_bob: int = 40
    allowance_for_bob: int = 50
    delegated_spend: int = 30
    oversized_spend: int = 1000
    mint_to_dave: int = 10


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv

HOLDERS = ("owner", "alice", "bob", "carol", "dave")


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    print(f"\n--- {text} ---\n")


def show_balances(token: TokenContract):
    for holder in HOLDERS:
        print(f"  {holder:<8} {token.query_balance(holder):>8}")
    print(f"  {'supply':<8} {token.total_supply():>8}")


def attempt(label: str, fn, *args):
    """Run a call that is expected to be rejected and report what happened."""
    print(f">>> {label}")
    try:
        fn(*args)
    except TokenError as e:
        print(f"    rejected with {type(e).__name__}")
        return e
    print("    accepted")
    return None


# ============================================================================
# PHASE 1: FOUNDATION
# ============================================================================

def step_01_instantiate():
    """Scenario A: create the token with one initial holder."""
    step_header(1, "Instantiation",
        "The instantiating caller becomes owner; initial balances define the supply.")

    print("""
    A token contract holds three kinds of state:

    1. TOKEN INFO - name, symbol, decimals and the running total supply
    2. BALANCES   - address -> amount (absent means zero)
    3. ALLOWANCES - (owner, spender) -> amount a spender may draw

    Every mutating call runs inside a storage transaction that is committed
    only if the call succeeds.
    """)

    wait_for_enter()

    print('>>> token = TokenContract("tutorial")')
    token = TokenContract("tutorial", verbose=True)
    print(f'>>> token.instantiate("{CONFIG.owner}", [("alice", {CONFIG.alice_initial})])')
    outcome = token.instantiate(CONFIG.owner, [("alice", CONFIG.alice_initial)])
    print(outcome)

    section_header("State")
    info = token.query_token_info()
    print(f"Name / symbol / decimals: {info.name} / {info.symbol} / {info.decimals}")
    print(f"Owner:                    {token.contract_state().owner}")
    show_balances(token)
    return token


def step_02_transfer(token: TokenContract):
    """Scenario B: a plain transfer."""
    step_header(2, "Transfers",
        "A transfer moves tokens between holders; total supply does not change.")

    print(f'>>> token.transfer("alice", "bob", {CONFIG.transfer_to_bob})')
    token.transfer("alice", "bob", CONFIG.transfer_to_bob)
    show_balances(token)

    section_header("Key Insight")
    print("""
    Bob never appeared before this call. Unseen addresses read as zero, so
    crediting him needs no registration step.
    """)
    return token


# ============================================================================
# PHASE 2: DELEGATION
# ============================================================================

def step_03_allowance(token: TokenContract):
    """Scenario C: approve, then spend through transfer_from."""
    step_header(3, "Allowances",
        "An owner lets a spender move up to a fixed amount of the owner's tokens.")

    print(f'>>> token.approve("alice", "bob", {CONFIG.allowance_for_bob})')
    token.approve("alice", "bob", CONFIG.allowance_for_bob)
    print(f'>>> token.transfer_from("bob", "alice", "carol", {CONFIG.delegated_spend})')
    token.transfer_from("bob", "alice", "carol", CONFIG.delegated_spend)

    section_header("After the delegated transfer")
    print(f"Allowance alice -> bob: {token.query_allowance('alice', 'bob')}")
    show_balances(token)

    section_header("Key Insight")
    print("""
    approve() ADDS to the existing allowance rather than replacing it.
    Use decrease_allowance() to revoke part or all of a grant.
    """)
    return token


def step_04_rejected_spend(token: TokenContract):
    """Scenario D: a spend beyond the allowance is rejected."""
    step_header(4, "Rejected Spend",
        "A spend over the remaining allowance fails and changes nothing.")

    before = token.storage.snapshot()
    err = attempt(
        f'token.transfer_from("bob", "alice", "carol", {CONFIG.oversized_spend})',
        token.transfer_from, "bob", "alice", "carol", CONFIG.oversized_spend,
    )
    assert isinstance(err, InsufficientAllowance)
    print(f"\nStorage unchanged: {token.storage.snapshot() == before}")
    return token


# ============================================================================
# PHASE 3: SUPPLY CONTROL
# ============================================================================

def step_05_pause_and_mint(token: TokenContract):
    """Scenario E: mint is refused while paused."""
    step_header(5, "Pause and Mint",
        "Only the owner may mint, and never while the contract is paused.")

    attempt('token.mint("alice", "alice", 10)', token.mint, "alice", "alice", 10)

    print(f'\n>>> token.pause("{CONFIG.owner}")')
    token.pause(CONFIG.owner)
    err = attempt(
        f'token.mint("{CONFIG.owner}", "dave", {CONFIG.mint_to_dave})',
        token.mint, CONFIG.owner, "dave", CONFIG.mint_to_dave,
    )
    assert isinstance(err, ContractPaused)
    print(f"\nTotal supply still {token.total_supply()}")

    print(f'\n>>> token.unpause("{CONFIG.owner}")')
    token.unpause(CONFIG.owner)
    print(f'>>> token.mint("{CONFIG.owner}", "dave", {CONFIG.mint_to_dave})')
    token.mint(CONFIG.owner, "dave", CONFIG.mint_to_dave)
    show_balances(token)

    section_header("Key Insight")
    print("""
    Pause gates only mint. Transfers, approvals and burns keep working so
    holders are never locked out of their own tokens.
    """)
    return token


def step_06_burn(token: TokenContract):
    """Scenario F: burn down to zero, then overdraw."""
    step_header(6, "Burn",
        "Holders destroy their own tokens; supply falls by the same amount.")

    held = token.query_balance("alice")
    print(f'>>> token.burn("alice", {held})')
    token.burn("alice", held)
    show_balances(token)

    err = attempt('token.burn("alice", 1)', token.burn, "alice", 1)
    assert isinstance(err, InsufficientBalance)
    return token


# ============================================================================
# PHASE 4: GUARANTEES
# ============================================================================

def step_07_reentrancy():
    """Show the reentrancy guard refusing a nested mint."""
    step_header(7, "Reentrancy Guard",
        "A mint that finds the guard already held is refused.")

    print("""
    Mint takes a guard flag, stored with the contract state, around its
    credit and supply update. The flag is cleared on every exit path. Here
    we fake a call that is already inside a mint by writing the flag directly.
    """)

    storage = MemoryStorage()
    token = TokenContract("guarded", storage=storage, verbose=False)
    token.instantiate(CONFIG.owner, [("alice", 1)])
    state = token.contract_state()
    state.reentrancy_guard = True
    storage.save(STATE_KEY, encode_state(state))

    err = attempt(f'token.mint("{CONFIG.owner}", "dave", 5)', token.mint, CONFIG.owner, "dave", 5)
    assert isinstance(err, ReentrantCall)

    err = attempt('token.mint("alice", "dave", 5)', token.mint, "alice", "dave", 5)
    assert isinstance(err, Unauthorized)
    print("\nAuthorization is checked before the guard, so strangers never touch it.")


def step_08_conservation(token: TokenContract):
    """Final proof that supply equals the sum of balances."""
    step_header(8, "Conservation Finale",
        "Through every accepted and rejected call, supply equals the sum of balances.")

    result = token.verify_supply(HOLDERS)
    print(f"Total supply:   {result['total_supply']}")
    print(f"Sum of balances:{result['balance_sum']:>4}")
    print(f"Difference:     {result['difference']}")
    print(f"Valid:          {result['valid']}")
    print(f"\nCalls applied:  {token.calls_applied}")
    print(f"Calls rejected: {token.calls_rejected}")
    assert result['valid']


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       TOKEN LEDGER - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    wait_for_enter()

    token = step_01_instantiate()
    wait_for_enter()

    token = step_02_transfer(token)
    wait_for_enter()

    token = step_03_allowance(token)
    wait_for_enter()

    token = step_04_rejected_spend(token)
    wait_for_enter()

    token = step_05_pause_and_mint(token)
    wait_for_enter()

    token = step_06_burn(token)
    wait_for_enter()

    step_07_reentrancy()
    wait_for_enter()

    step_08_conservation(token)

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print("""
    You've learned:
      - Supply changes only through mint and burn
      - Allowances accumulate and are spent by transfer_from
      - A rejected call leaves storage byte-for-byte unchanged
      - The owner alone mints and pauses; pause gates only mint

    Next steps:
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()
