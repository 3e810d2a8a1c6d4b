from bullbench.runner.main import run_comparison

run_comparison()
