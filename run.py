from washboard import create_app, get_services

app = create_app()

if __name__ == '__main__':
    try:
        app.run(debug=True)
    finally:
        get_services(app).store.close()
