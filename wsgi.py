import os
from dotenv import load_dotenv

load_dotenv()

from scholarstream import create_app

config = os.getenv("APP_ENV", "production")

app = create_app(config)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
