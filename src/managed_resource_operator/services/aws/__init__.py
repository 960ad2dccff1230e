"""AWS-backed external resource clients."""
