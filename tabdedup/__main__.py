from tabdedup.cli import main

main()
