from campus_proxy.server import main

main()
