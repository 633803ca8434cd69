"""
开发服务器入口：python run.py
"""
import os

import uvicorn

from draftless.core.constants import ServerConstants

if __name__ == "__main__":
    port = int(os.getenv("PORT", ServerConstants.DEFAULT_PORT))
    uvicorn.run("draftless.main:app", host=ServerConstants.DEFAULT_HOST, port=port, reload=True)
