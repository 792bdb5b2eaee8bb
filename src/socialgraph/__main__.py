"""Run with: python -m socialgraph"""
from socialgraph.main import main

if __name__ == "__main__":
    main()
