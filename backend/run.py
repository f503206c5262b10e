from countup import create_app, socketio

app = create_app()
 
if __name__ == '__main__':
    # Use SocketIO server so the /ws push channel works in dev
    socketio.run(app, debug=True)
