from revman.cli import main

main()
