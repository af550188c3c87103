"""
ExitStack: acquire a dynamic number of resources and release them in LIFO order.

Run: python examples/resource_safety.py
"""
from scopepy import ContextManagerBase, ExitStack, ConsoleLogger, set_logger, with_context


class Connection(ContextManagerBase):
    def __init__(self, name: str):
        self.name = name

    def enter(self) -> "Connection":
        print(f"[conn] open {self.name}")
        return self

    def exit(self, *error):
        print(f"[conn] close {self.name}")

    def query(self, x: int) -> int:
        return x * 3


def main():
    set_logger(ConsoleLogger(level="DEBUG"))

    def body(stack: ExitStack) -> int:
        conns = [stack.enter_context(Connection(n)) for n in ("primary", "replica", "cache")]
        stack.callback(lambda *err: print("[app] all connections released next"))
        return sum(c.query(7) for c in conns)

    res = with_context(ExitStack(), body)
    print("query =>", res.result)  # 63

    # Keep resources open past the block by handing the stack to the caller
    def open_pool(stack: ExitStack) -> ExitStack:
        stack.enter_context(Connection("pooled-1"))
        stack.enter_context(Connection("pooled-2"))
        return stack.pop_all()

    pool = with_context(ExitStack(), open_pool).result
    print("[app] pool still open")
    pool.close()


if __name__ == "__main__":
    main()
