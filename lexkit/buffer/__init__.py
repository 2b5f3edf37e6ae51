"""In-memory and streaming lexer buffers, and simple byte readers and writers."""