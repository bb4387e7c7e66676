from scaffold.pipeline import main

main()
