from oauth_callback.main import main

main()
