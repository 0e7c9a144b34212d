from ssh_proxy_cli.app import main

main()
