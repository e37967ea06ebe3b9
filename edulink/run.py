import uvicorn
from edulink import create_app

# Create the FastAPI app using the create_app function
app = create_app()


if __name__ == "__main__":
    uvicorn.run("edulink.run:app", host="0.0.0.0", port=8000, reload=True)
