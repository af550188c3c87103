"""
Generator-based context managers: setup, a single yield, cleanup.

Run: python examples/generator_managers.py
"""
from scopepy import ExitStack, contextmanager, with_context


@contextmanager
def transaction(name: str):
    print(f"[tx] begin {name}")
    try:
        yield name
    except ValueError as e:
        # Handled here, so the error does not reach the caller
        print(f"[tx] rollback {name}: {e}")
    else:
        print(f"[tx] commit {name}")


def main():
    res = with_context(transaction("orders"), lambda tx: f"wrote to {tx}")
    print(res)

    def bad(_):
        raise ValueError("constraint violated")

    res = with_context(transaction("payments"), bad)
    print("suppressed:", res.suppressed, repr(res.error))

    # Generators compose inside an ExitStack like any other manager
    with ExitStack() as stack:
        for n in ("a", "b"):
            stack.enter_context(transaction(n))
        print("[app] inside two transactions")


if __name__ == "__main__":
    main()
