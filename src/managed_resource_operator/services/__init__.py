"""External resource clients."""
