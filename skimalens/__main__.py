from skimalens.cli.app import main

main()
