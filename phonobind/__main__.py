from phonobind.cli import main

main()
