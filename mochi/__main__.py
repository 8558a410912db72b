"""Run: python -m mochi"""

from mochi.main import main

main()
