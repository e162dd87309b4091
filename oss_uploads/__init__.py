"""
阿里云OSS上传插件
将论坛的图片和文件上传到阿里云对象存储
"""
__version__ = "1.0.0"
