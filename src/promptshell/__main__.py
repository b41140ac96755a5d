from promptshell.shell import main

main()
