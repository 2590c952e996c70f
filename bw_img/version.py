VERSION = '0.1.0'

PROJECT_URL = 'https://github.com/bw-img/bw-img'
