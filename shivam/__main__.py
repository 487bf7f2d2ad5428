from shivam.cli import main

main()
